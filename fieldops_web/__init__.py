"""Field Ops Web: ECC compliance testing and job lifecycle service."""

__version__ = "1.0.0"
