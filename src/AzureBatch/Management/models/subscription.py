# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ._wire import _parse_int


@dataclass
class SubscriptionQuotas:
    """
    Batch quotas of a subscription in one region.

    :param account_quota: Number of Batch accounts the subscription may create in the region.
    :type account_quota: int | None
    """

    account_quota: Optional[int] = None

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "SubscriptionQuotas":
        return cls(account_quota=_parse_int(data.get("accountQuota")))
