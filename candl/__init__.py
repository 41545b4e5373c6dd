"""Relations, statements, dependences, quasts and violation systems for
checking schedules of static control programs."""

__version__ = "0.6.3"