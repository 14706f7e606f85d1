"""
Importers that turn source trace formats into a flat-sample ``Profile``.
"""

from .chrome import import_from_chrome_cpu_profile, import_from_chrome_timeline

__all__ = ["import_from_chrome_cpu_profile", "import_from_chrome_timeline"]
