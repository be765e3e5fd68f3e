"""
Astronomy Picture integration for Unfolded Circle Remote.

Shows a random NASA Astronomy Picture of the Day, with its title and
copyright line, on a media player entity.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

__version__ = "0.1.0"
__author__ = "Meir Miyara"
__email__ = "meir.miyara@gmail.com"
