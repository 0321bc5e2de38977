"""
Tests for dictionary serialization of the models.
"""

import unittest

from sitetargets.models import (
    COMBINED_SITE_ID,
    DnsAzureOptions,
    DnsScriptOptions,
    HttpFtpOptions,
    HttpWebDavOptions,
    SharedSettings,
    SiteTarget,
)


class TestSerialization(unittest.TestCase):
    """Test to_dict and from_dict of the models."""

    def setUp(self):
        """Set up a combined target with every setting filled in."""
        self.settings = SharedSettings(
            ssl_port=8443,
            validation_port=8080,
            validation_site_id=2,
            installation_site_id=5,
            ftp_site_id=7,
            exclude_bindings="old.example.com",
            validation_plugin_name="dns-script",
            dns_azure_options=DnsAzureOptions(tenant_id="tenant", client_id="client"),
            dns_script_options=DnsScriptOptions(create_script="create.sh", delete_script="delete.sh"),
            http_ftp_options=HttpFtpOptions(path="ftp://host/path", user_name="ftp"),
            http_webdav_options=HttpWebDavOptions(path="https://dav/path", user_name="dav"),
        )
        self.target = SiteTarget(
            site_id=COMBINED_SITE_ID,
            hostnames=["example.com", "shop.example.com"],
            display_host="2,5",
            common_name="example.com",
            member_site_ids=(2, 5),
            settings=self.settings,
        )

    def test_to_dict(self):
        """Test the dictionary layout of a target."""
        data = self.target.to_dict()
        self.assertEqual(data["site_id"], -1)
        self.assertEqual(data["host"], "2,5")
        self.assertEqual(data["hostnames"], ["example.com", "shop.example.com"])
        self.assertEqual(data["member_site_ids"], [2, 5])
        self.assertEqual(data["settings"]["ssl_port"], 8443)
        self.assertEqual(data["settings"]["dns_script_options"], {
            "create_script": "create.sh",
            "delete_script": "delete.sh",
        })

    def test_from_dict_restores_target(self):
        """Test that from_dict restores what to_dict wrote."""
        restored = SiteTarget.from_dict(self.target.to_dict())
        self.assertEqual(restored, self.target)

    def test_from_dict_legacy_without_members(self):
        """Test that targets stored without member ids still decode."""
        data = {"site_id": -1, "host": "3,4", "hostnames": ["a.example.com"]}
        target = SiteTarget.from_dict(data)
        self.assertEqual(target.member_site_ids, ())
        self.assertEqual(target.display_host, "3,4")
        self.assertEqual(target.settings, SharedSettings())

    def test_from_dict_invalid(self):
        """Test that invalid target data is rejected."""
        with self.assertRaises(ValueError):
            SiteTarget.from_dict({"host": "a"})
        with self.assertRaises(ValueError):
            SiteTarget.from_dict({"site_id": "abc"})

    def test_settings_from_empty(self):
        """Test that missing settings fall back to defaults."""
        self.assertEqual(SharedSettings.from_dict(None), SharedSettings())
        self.assertEqual(SharedSettings.from_dict({"dns_azure_options": None}), SharedSettings())


if __name__ == "__main__":
    unittest.main()
