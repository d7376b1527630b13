"""Billing account helpers."""

from __future__ import annotations

from .constants import BILLING_ACCOUNT_PREFIX, PROJECT_PREFIX
from .exceptions import BillingAccountParseError


def billing_info_body(billing_account: str) -> dict:
    """Build the ``updateBillingInfo`` request body for a billing account id.

    Parameters
    ----------
    billing_account : str
        Billing account ID (for example ``"012345-567890-ABCDEF"``) or ``""``.

    Returns
    -------
    dict
        ``{"billingAccountName": "billingAccounts/{id}"}``, or ``{}`` when
        ``billing_account`` is empty.

    Notes
    -----
    The Cloud Billing API unlinks a project when the request omits
    ``billingAccountName``. Sending an explicit empty string is a different
    request, so the key is left out entirely.
    """
    if not billing_account:
        return {}
    return {"billingAccountName": f"{BILLING_ACCOUNT_PREFIX}{billing_account}"}


def parse_billing_account_name(billing_account_name: str, *, project_id: str) -> str:
    """Strip ``billingAccounts/`` from a billing account resource name.

    An empty name means the project has no billing account and yields ``""``.

    Raises
    ------
    BillingAccountParseError
        If a non-empty name does not start with ``billingAccounts/``.
    """
    if not billing_account_name:
        return ""
    if not billing_account_name.startswith(BILLING_ACCOUNT_PREFIX):
        raise BillingAccountParseError(
            f"Error parsing billing account for project '{PROJECT_PREFIX}{project_id}'. "
            f"Expected value to begin with {BILLING_ACCOUNT_PREFIX!r} but got {billing_account_name!r}"
        )
    return billing_account_name[len(BILLING_ACCOUNT_PREFIX) :]


__all__ = ["billing_info_body", "parse_billing_account_name"]
