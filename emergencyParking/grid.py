from mesa import Agent


class SpotError(RuntimeError):
    """Raised when a parking space is occupied or freed out of turn."""


class ParkingSpace(Agent):
    def __init__(self, model, pos, index):
        super().__init__(model)
        self.pos = pos
        self.index = index
        self.occupied = False
        self.occupant_id = None
        self.carryover_paid_time = 0.0

    def step(self):
        pass


class SpotGrid:
    """
    Fixed width x height block of parking spaces.

    Spaces are indexed row-major (index = y * width + x), so the initial
    assignment of cars to spaces and find_free() are stable for a seed.
    """

    def __init__(self, model, width, height):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid size must be positive, got {width}x{height}")

        self.width = width
        self.height = height
        self.spaces = []
        for y in range(height):
            for x in range(width):
                self.spaces.append(ParkingSpace(model, (x, y), len(self.spaces)))

    def __len__(self):
        return len(self.spaces)

    def __iter__(self):
        return iter(self.spaces)

    def __getitem__(self, index):
        return self.spaces[index]

    def find_free(self):
        for s in self.spaces:
            if not s.occupied:
                return s
        return None

    def occupy(self, space, agent_id):
        if space.occupied:
            raise SpotError(
                f"Space {space.index} already occupied by {space.occupant_id}"
            )
        space.occupied = True
        space.occupant_id = agent_id

    def free(self, space, carryover_paid_time):
        if not space.occupied:
            raise SpotError(f"Space {space.index} is not occupied")
        space.occupied = False
        space.occupant_id = None
        space.carryover_paid_time = max(0.0, carryover_paid_time)

    def free_count(self):
        return sum(1 for s in self.spaces if not s.occupied)

    def occupied_count(self):
        return sum(1 for s in self.spaces if s.occupied)
