import random


class RandomSource:
    """
    Seeded source for every stochastic decision in the model.
    Wraps a random.Random (normally the mesa model's own generator) so a
    whole run is reproducible from a single seed.
    """

    def __init__(self, rng=None, seed=None):
        self.rng = rng if rng is not None else random.Random(seed)

    def uniform_real(self, a, b):
        return self.rng.uniform(a, b)

    def uniform_int(self, a, b):
        return self.rng.randint(a, b)

    def bernoulli(self, p):
        if p <= 0.0:
            return False
        if p >= 1.0:
            return True
        return self.rng.random() < p

    def choice(self, seq):
        return self.rng.choice(seq)

    def sample(self, population, k):
        return self.rng.sample(population, k)
