__title__ = "secondary_table_controller"
__description__ = (
    "Manages a fixed pool of secondary policy-routing tables, one per active "
    "interface, with optional multipath source rules on multi-homed devices."
)
__url__ = "https://github.com/rgnets/secondary-table-controller"
__author__ = "Michael Ketchel"
__author_email__ = "mdk@rgnets.com"
__version__ = "0.1.0-1"
__status__ = "alpha"
__license__ = "BSD-3-Clause"
__license_url__ = "https://opensource.org/licenses/BSD-3-Clause"
