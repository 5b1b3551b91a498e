class SimulationClock:
    """
    Discrete clock: each tick advances time by cycle_duration hours.
    tick() reports how many hourly spawn events fall due in the new cycle.
    """

    def __init__(self, cycle_duration, total_cycles, spawn_interval=1.0):
        if cycle_duration <= 0:
            raise ValueError(f"cycle_duration must be positive, got {cycle_duration}")
        if total_cycles <= 0:
            raise ValueError(f"total_cycles must be positive, got {total_cycles}")

        self.cycle_duration = cycle_duration
        self.total_cycles = total_cycles
        self.spawn_interval = spawn_interval

        self.cycle = 0
        self.time = 0.0
        self.next_spawn_time = spawn_interval

    def tick(self):
        self.cycle += 1
        # derive from the cycle count so float error does not accumulate
        self.time = self.cycle * self.cycle_duration

        due = 0
        while self.time + 1e-9 >= self.next_spawn_time:
            due += 1
            self.next_spawn_time += self.spawn_interval
        return due

    @property
    def finished(self):
        return self.cycle >= self.total_cycles
