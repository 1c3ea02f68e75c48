"""twig: a small content-addressed version-control storage engine."""

__version__ = '0.1.0'
