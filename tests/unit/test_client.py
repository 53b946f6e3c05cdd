# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import unittest
from unittest.mock import MagicMock

from AzureBatch.Management.client import BatchManagementClient
from AzureBatch.Management.core.config import BatchManagementConfig
from AzureBatch.Management.core.errors import ValidationError
from AzureBatch.Management.core.results import OperationResult
from AzureBatch.Management.operations.accounts import AccountOperations
from AzureBatch.Management.operations.applications import ApplicationOperations
from AzureBatch.Management.operations.subscriptions import SubscriptionOperations

from tests.unit.test_helpers import make_config, make_credential


class TestBatchManagementClient(unittest.TestCase):
    def setUp(self):
        """Set up test fixtures before each test method."""
        self.credential = make_credential()
        self.client = BatchManagementClient(self.credential, "12345", make_config())

        # Mock the internal management client so operations are verified without HTTP calls
        self.client._rest = MagicMock()
        self.client._rest._invoke.return_value = OperationResult(None)

    def test_namespaces(self):
        self.assertIsInstance(self.client.accounts, AccountOperations)
        self.assertIsInstance(self.client.applications, ApplicationOperations)
        self.assertIsInstance(self.client.subscriptions, SubscriptionOperations)
        self.assertEqual(self.client.subscription_id, "12345")

    def test_get_routes_through_invoke(self):
        """Test that accounts.get builds path parameters and delegates to _invoke."""
        self.client.accounts.get("my-rg", "myaccount")

        args, _ = self.client._rest._invoke.call_args
        self.assertEqual(args[0].name, "accounts.get")
        self.assertEqual(args[0].method, "GET")
        self.assertEqual(args[1], {"resourceGroupName": "my-rg", "accountName": "myaccount"})

    def test_begin_create_passes_polling_options(self):
        token = MagicMock()
        self.client.accounts.begin_create(
            "my-rg", "myaccount", {"location": "westus"}, polling_interval=5, cancellation=token
        )

        _, kwargs = self.client._rest._invoke.call_args
        self.assertEqual(kwargs["polling_interval"], 5)
        self.assertIs(kwargs["cancellation"], token)
        self.assertEqual(kwargs["body"], {"location": "westus"})

    def test_create_waits_with_configured_timeout(self):
        """Test that create() falls back to config.polling_timeout."""
        client = BatchManagementClient(self.credential, "12345", make_config(polling_timeout=42.0))
        client._rest = MagicMock()
        poller = client._rest._invoke.return_value
        poller.result.return_value = "account"

        result = client.accounts.create("my-rg", "myaccount", {"location": "westus"})

        poller.result.assert_called_once_with(timeout=42.0)
        self.assertEqual(result.value, "account")
        self.assertIs(result.metadata, poller.metadata)

    def test_explicit_timeout_wins(self):
        poller = self.client._rest._invoke.return_value = MagicMock()
        self.client.accounts.delete("my-rg", "myaccount", timeout=7)
        poller.result.assert_called_once_with(timeout=7)

    def test_list_by_resource_group(self):
        self.client.accounts.list("my-rg", timeout=10)

        args, kwargs = self.client._rest._invoke.call_args
        self.assertEqual(args[0].name, "accounts.list_by_resource_group")
        self.assertTrue(args[0].paged)
        self.assertEqual(kwargs["timeout"], 10)


class TestClientConstruction(unittest.TestCase):
    def test_missing_subscription_id(self):
        with self.assertRaises(ValidationError):
            BatchManagementClient(make_credential(), "")

    def test_rejects_non_token_credential(self):
        with self.assertRaises(TypeError):
            BatchManagementClient(object(), "12345")

    def test_default_config_from_env(self):
        client = BatchManagementClient(make_credential(), "12345")
        self.assertEqual(client._config, BatchManagementConfig.from_env())

    def test_rest_client_uses_config(self):
        client = BatchManagementClient(make_credential(), "12345", make_config(api_version="2017-05-01"))
        rest = client._get_rest()
        self.assertEqual(rest.config.api_version, "2017-05-01")
        self.assertEqual(rest.subscription_id, "12345")

    def test_independent_clients_share_nothing(self):
        first = BatchManagementClient(make_credential(), "sub-a", make_config())
        second = BatchManagementClient(make_credential(), "sub-b", make_config())
        self.assertIsNot(first._get_rest(), second._get_rest())
        self.assertIsNot(first._get_rest()._http, second._get_rest()._http)


if __name__ == "__main__":
    unittest.main()
