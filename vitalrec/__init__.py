"""vitalrec: synthetic vital-records dataset generator.

Fabricates a genealogical corpus (registers, persons, marriages, deaths,
witnesses and lookup tables) and emits it both as relational INSERT
statements and as denormalized documents for database benchmarking.
"""

__version__ = "0.3.0"
