# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Data models for the Batch management client.

- :mod:`~AzureBatch.Management.models.account`: Batch accounts, keys and create/update parameters.
- :mod:`~AzureBatch.Management.models.application`: Applications and application packages.
- :mod:`~AzureBatch.Management.models.subscription`: Subscription-level quotas.
- :mod:`~AzureBatch.Management.models.error`: The service error envelope.

Note:
    This ``__init__.py`` does NOT import/export models. Import directly from
    the specific module files.
"""

__all__ = []
