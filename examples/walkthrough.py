# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Walkthrough demonstrating core Batch management operations.

This example shows:
- Subscription quota lookup
- Account creation as a long-running operation, with progress polling
- Listing accounts page by page
- Key listing and regeneration
- Applications and application packages
- Cleanup (account deletion)

Prerequisites:
- pip install azure-batch-management-client[examples]
- an existing resource group in the target subscription
"""

import sys

from azure.identity import InteractiveBrowserCredential

from AzureBatch.Management.client import BatchManagementClient
from AzureBatch.Management.core.config import BatchManagementConfig
from AzureBatch.Management.core.errors import BatchManagementError, HttpError
from AzureBatch.Management.core.telemetry import TelemetryConfig
from AzureBatch.Management.models.account import AccountKeyType, BatchAccountCreateParameters
from AzureBatch.Management.models.application import AddApplicationParameters, UpdateApplicationParameters


# Simple logging helper
def log_call(description):
    print(f"\n→ {description}")


def section(title):
    print("\n" + "=" * 80)
    print(title)
    print("=" * 80)


def main():
    section("Azure Batch Management Walkthrough")

    subscription_id = input("Subscription ID: ").strip()
    resource_group = input("Existing resource group: ").strip()
    location = input("Location (default westus): ").strip() or "westus"
    account_name = input("New Batch account name (3-24 chars): ").strip()
    if not (subscription_id and resource_group and account_name):
        print("Missing input; exiting.")
        sys.exit(1)

    config = BatchManagementConfig(
        polling_interval=10.0,
        polling_timeout=900.0,
        telemetry=TelemetryConfig(enable_logging=True, log_level="INFO"),
    )

    log_call("InteractiveBrowserCredential()")
    credential = InteractiveBrowserCredential()

    with BatchManagementClient(credential, subscription_id, config) as client:
        # ========================================================================
        # 1. QUOTAS
        # ========================================================================
        section("1. Quotas")
        log_call(f"client.subscriptions.get_quotas('{location}')")
        quotas = client.subscriptions.get_quotas(location)
        print(f"✓ Account quota in {location}: {quotas.account_quota}")

        # ========================================================================
        # 2. ACCOUNT CREATION (LONG-RUNNING)
        # ========================================================================
        section("2. Account Creation")
        params = BatchAccountCreateParameters(location=location, tags={"purpose": "walkthrough"})
        log_call(f"client.accounts.begin_create('{resource_group}', '{account_name}', ...)")
        poller = client.accounts.begin_create(resource_group, account_name, params)
        print(f"  Status: {poller.status()}")
        try:
            account = poller.result()
        except BatchManagementError as e:
            print(f"✗ Create failed: {e}")
            sys.exit(1)
        print(f"✓ Created after {poller.attempts} poll(s): {account.id}")
        print(f"  Endpoint: {account.properties.account_endpoint}")
        print(f"  Core quota: {account.properties.core_quota}")

        # ========================================================================
        # 3. LISTING
        # ========================================================================
        section("3. Listing")
        log_call(f"client.accounts.list('{resource_group}').by_page()")
        for i, page in enumerate(client.accounts.list(resource_group).by_page(), start=1):
            print(f"  Page {i}: {[a.name for a in page]}")

        # ========================================================================
        # 4. KEYS
        # ========================================================================
        section("4. Keys")
        log_call("client.accounts.list_keys(...)")
        keys = client.accounts.list_keys(resource_group, account_name).value
        print(f"✓ {keys!r}")
        log_call("client.accounts.regenerate_key(..., AccountKeyType.SECONDARY)")
        client.accounts.regenerate_key(resource_group, account_name, AccountKeyType.SECONDARY)
        print("✓ Secondary key regenerated")

        # ========================================================================
        # 5. APPLICATIONS
        # ========================================================================
        section("5. Applications")
        app_id = "walkthrough-app"
        log_call(f"client.applications.add_application(..., '{app_id}', ...)")
        client.applications.add_application(
            resource_group, account_name, app_id, AddApplicationParameters(display_name="Walkthrough")
        )
        client.applications.update_application(
            resource_group, account_name, app_id, UpdateApplicationParameters(allow_updates=True)
        )
        for app in client.applications.list(resource_group, account_name):
            print(f"  {app.id}: display_name={app.display_name} allow_updates={app.allow_updates}")

        try:
            # Requires an auto-storage account linked to the Batch account.
            package = client.applications.add_application_package(resource_group, account_name, app_id, "1.0").value
            print(f"✓ Upload package content to: {package.storage_url}")
        except HttpError as e:
            print(f"  Skipping packages ({e.status_code} {e.service_error_code})")

        client.applications.delete_application(resource_group, account_name, app_id)

        # ========================================================================
        # 6. CLEANUP
        # ========================================================================
        section("6. Cleanup")
        log_call(f"client.accounts.delete('{resource_group}', '{account_name}')")
        client.accounts.delete(resource_group, account_name)
        print("✓ Account deleted")


if __name__ == "__main__":
    main()
