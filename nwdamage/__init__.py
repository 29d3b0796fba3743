"""Analysis of primary knock-on atom records from neutron irradiation simulations."""

__version__ = "0.1.0"