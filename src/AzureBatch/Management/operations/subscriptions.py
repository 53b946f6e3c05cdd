# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Subscription-level Batch operations namespace."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core._validation import _check_name
from ..core.results import OperationResult
from ..models.subscription import SubscriptionQuotas
from ._descriptors import ResourceOperation, _codes

if TYPE_CHECKING:
    from ..client import BatchManagementClient


_GET_QUOTAS = ResourceOperation(
    "subscriptions.get_quotas",
    "GET",
    "/subscriptions/{subscriptionId}/providers/Microsoft.Batch/locations/{locationName}/quotas",
    _codes(200),
    deserialize=SubscriptionQuotas.from_api_response,
)


class SubscriptionOperations:
    """
    Subscription-level operations.

    Accessed via ``client.subscriptions``.

    Example::

        quotas = client.subscriptions.get_quotas("westus").value
        print(quotas.account_quota)
    """

    def __init__(self, client: "BatchManagementClient") -> None:
        self._client = client

    def get_quotas(self, location_name: str) -> OperationResult[SubscriptionQuotas]:
        """
        Get the Batch service quotas of the subscription in one region.

        :param location_name: Azure region, e.g. ``"westus"``.
        :type location_name: str
        :rtype: ~AzureBatch.Management.core.results.OperationResult[SubscriptionQuotas]
        """
        _check_name(location_name, "location_name")
        return self._client._get_rest()._invoke(_GET_QUOTAS, {"locationName": location_name})
