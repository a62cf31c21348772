"""
geotides.constants - Physical constants shared by the tide models

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

__all__ = [
    'GM_EARTH',
    'R_EARTH',
    'GM_SUN',
    'GM_MOON',
    'R_MOON',
    'GM_PLANETS',
    'OMEGA_EARTH',
    'GRAVITATIONAL_CONSTANT',
    'RHO_SEAWATER',
    'GRAVITY_EQUATOR',
    'MJD_J2000',
    'ARCSEC_TO_RAD',
]

# Earth (IERS 2010 conventions)
GM_EARTH = 3.986004415e14     # m^3/s^2
R_EARTH = 6378136.3           # m
OMEGA_EARTH = 7.292115e-5     # rad/s

# Sun and Moon
GM_SUN = 1.32712442099e20     # m^3/s^2
GM_MOON = 4.902800076e12      # m^3/s^2
R_MOON = 1738000.0            # m

# Planets (DE430)
GM_PLANETS = {
    'mercury': 2.2031780000e13,
    'venus': 3.2485859200e14,
    'mars': 4.2828375214e13,
    'jupiter': 1.2671276480e17,
    'saturn': 3.7940585200e16,
}

GRAVITATIONAL_CONSTANT = 6.67430e-11  # m^3/(kg s^2)
RHO_SEAWATER = 1025.0                 # kg/m^3
GRAVITY_EQUATOR = 9.7803278           # m/s^2

MJD_J2000 = 51544.5
ARCSEC_TO_RAD = 3.141592653589793 / (180.0 * 3600.0)
