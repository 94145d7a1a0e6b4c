import argparse
import os
import tempfile
import unittest
import uuid
from pathlib import Path

from gcsdrive import (
    AuthInfo,
    DriveSettings,
    GoogleCloudStorageProvider,
    NewObjectOptions,
)


def _env(name: str) -> str:
    value = os.environ.get(name, "").strip()
    if not value:
        raise unittest.SkipTest(f"Missing env var: {name}")
    return value


class TestCloudStorageIntegration(unittest.TestCase):
    """
    Integration test against real Cloud Storage.

    Required env vars:
        - GCSDRIVE_TEST_BUCKET: existing bucket used as a sandbox; the test
          only touches keys under a fresh random folder

    Optional:
        - GCSDRIVE_CLIENT_SECRETS / GCSDRIVE_TOKEN_FILE: use OAuth instead of
          Application Default Credentials
        - GCSDRIVE_DANGER_BUCKET=1: also create and recursively remove a
          temporary bucket in the default project
    """

    @classmethod
    def setUpClass(cls) -> None:
        cls.bucket = _env("GCSDRIVE_TEST_BUCKET")

        client_secrets = os.environ.get("GCSDRIVE_CLIENT_SECRETS", "").strip()
        token_file = os.environ.get("GCSDRIVE_TOKEN_FILE", "").strip()
        if client_secrets and token_file:
            cls.auth_info = AuthInfo(
                kind="oauth",
                data={"client_secrets_file": client_secrets, "token_file": token_file},
            )
        else:
            cls.auth_info = AuthInfo.application_default()
        cls.settings = DriveSettings.from_env()

    def test_object_round_trip_smoke(self) -> None:
        provider = GoogleCloudStorageProvider(self.auth_info, settings=self.settings)
        folder = f"{self.bucket}/gcsdrive_it_{uuid.uuid4().hex[:8]}"

        provider.new_item(folder, item_type="Directory")
        self.assertTrue(provider.is_item_container(folder))

        provider.new_item(f"{folder}/hello.txt", value="hello from gcsdrive")
        with tempfile.TemporaryDirectory() as tmp:
            src_file = Path(tmp) / "data.json"
            src_file.write_text('{"ok": true}', encoding="utf-8")
            provider.new_item(f"{folder}/sub/data.json", options=NewObjectOptions(file=str(src_file)))

        self.assertTrue(provider.has_child_items(folder))
        names = sorted(e.item for e in provider.get_child_names(folder))
        self.assertEqual(names, ["hello.txt", "sub"])

        with provider.get_content_reader(f"{folder}/hello.txt") as reader:
            self.assertEqual(reader.read(), ["hello from gcsdrive"])

        copied = provider.copy_item(folder, f"{folder}_copy", recurse=True)
        self.assertEqual(len(copied), 3)

        provider.remove_item(folder, recurse=True)
        provider.remove_item(f"{folder}_copy", recurse=True)
        self.assertFalse(provider.item_exists(f"{folder}/hello.txt"))
        self.assertEqual(provider.error_records, [])

    def test_optional_danger_bucket(self) -> None:
        """
        Optional test: create and remove a whole bucket.

        Enabled only when env GCSDRIVE_DANGER_BUCKET=1 is set.
        """
        if os.environ.get("GCSDRIVE_DANGER_BUCKET", "").strip() != "1":
            self.skipTest("Set GCSDRIVE_DANGER_BUCKET=1 to enable the bucket lifecycle test")

        provider = GoogleCloudStorageProvider(self.auth_info, settings=self.settings)
        bucket = f"gcsdrive-it-{uuid.uuid4().hex[:12]}"

        provider.new_item(bucket)
        for i in range(3):
            provider.new_item(f"{bucket}/obj{i}.txt", value=str(i))
        provider.remove_item(bucket, recurse=True)

        self.assertFalse(provider.item_exists(bucket))


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose unittest output",
    )
    return parser.parse_args()


if __name__ == "__main__":
    args = _parse_args()
    unittest.main(verbosity=2 if args.verbose else 1)
