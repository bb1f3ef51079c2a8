"""
taxcentre — financial period aggregation and tax estimation for freelancers.

Revenue, allowable expenses, estimated tax and net profit for any tax year
or ad-hoc reporting window.
"""

__version__ = "0.1.0"
__all__ = ["TaxCentre"]

from taxcentre.centre import TaxCentre  # noqa: E402
