"""
helmsim
=======

Real-time simulation of a vessel's turbine propulsion and rudder.
"""

__version__ = "0.1.0"
