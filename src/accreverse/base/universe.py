import logging
import multiprocessing
import os

import numpy as np
import pandas as pd
from tqdm import tqdm

from ..config import Config

logger = logging.getLogger(__name__)


def _generate_one(config_dict, seed, name):
    from ..generator import Generator  # accreverse.generator imports this package

    config = Config(config_dict, seed=seed)
    return Generator(config).generate(name=name)


def _generate_job(job):
    return _generate_one(*job)


class Universe:
    """
    A collection of independently generated planetary systems.

    Run i is seeded from the i-th child of a SeedSequence built on the
    configured seed, so the whole universe is reproducible from one number
    while the systems share no random state.
    """

    def __init__(self, n_systems, config=None, workers=1, name_prefix="System"):
        """
        Args:
            n_systems (int):
                Number of systems to generate
            config (Config or dict):
                Configuration shared by every run. Its seed is the base seed.
            workers (int):
                Number of processes, 1 generates in this process
            name_prefix (str):
                Systems are named "<name_prefix>-<index>"
        """
        self.type = "Accrete"
        self.config = config if isinstance(config, Config) else Config(config)
        self.base_seed = self.config.resolve_seed()

        children = np.random.SeedSequence(self.base_seed).spawn(n_systems)
        self.seeds = [
            int(child.generate_state(1, dtype=np.uint64)[0]) or 1 for child in children
        ]
        self.names = [f"{name_prefix}-{i}" for i in range(n_systems)]

        config_dict = self.config.to_dict()
        jobs = [(config_dict, seed, name) for seed, name in zip(self.seeds, self.names)]

        cores = min(workers, os.cpu_count() or 1, max(n_systems, 1))
        if cores > 1:
            logger.info("Generating %d systems on %d cores", n_systems, cores)
            with multiprocessing.Pool(cores) as pool:
                self.systems = list(
                    tqdm(
                        pool.imap(_generate_job, jobs),
                        desc="Generating systems",
                        total=n_systems,
                        delay=0.5,
                    )
                )
        else:
            self.systems = [
                _generate_one(*job)
                for job in tqdm(jobs, desc="Generating systems", delay=0.5)
            ]

    def __repr__(self):
        str = f"{self.type} universe\n"
        str += f"{len(self.systems)} systems loaded"
        return str

    def __len__(self):
        return len(self.systems)

    def __getitem__(self, index):
        return self.systems[index]

    def get_u_df(self):
        """
        One row per system
        """
        return pd.DataFrame(
            {
                "name": [system.name for system in self.systems],
                "star": [system.star.stellar_class for system in self.systems],
                "seed": [system.seed for system in self.systems],
                "n_planets": [len(system) for system in self.systems],
                "protoplanets": [system.protoplanet_count for system in self.systems],
            }
        )
