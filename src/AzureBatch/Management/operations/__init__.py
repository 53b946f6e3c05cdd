# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Operation namespace classes for the Batch management client.

- AccountOperations: Batch account lifecycle, keys and listing
- ApplicationOperations: applications and application packages
- SubscriptionOperations: subscription quotas
"""

__all__ = []
