"""
Exporters that serialize or render a flat-sample Profile.
"""
