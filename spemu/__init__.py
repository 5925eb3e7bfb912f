"""
spemu – replay DML seed files against a Cloud Spanner emulator.
"""
__version__ = "0.3.0"
