"""Legacy role names mapped onto permission masks."""

from enum import Enum as PyEnum


class Role(str, PyEnum):
    """
    Named roles, each standing for a precomputed permission mask.

    Authorization never looks at the role name, only at the mask. Names are
    accepted when creating users (``role`` instead of a raw ``permission``)
    and reported back for display.

    Default masks:
    - ADMIN: every bit, including tenant management
    - OWNER: every resource bit (reports, taxis, expenses, deposits, users)
    - MANAGER: view/add/edit reports and deposits, view taxis
    - MECHANIC: view taxis and reports
    - DRIVER: view and add reports (their own)
    """

    ADMIN = "admin"
    OWNER = "owner"
    MANAGER = "manager"
    MECHANIC = "mechanic"
    DRIVER = "driver"
