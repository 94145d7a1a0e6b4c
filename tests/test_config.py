import unittest

from gcsdrive.config import DEFAULT_SCOPES, DriveSettings


class TestDriveSettings(unittest.TestCase):
    def test_defaults(self) -> None:
        s = DriveSettings()
        self.assertEqual(s.drive_name, "gs")
        self.assertEqual(s.cache_lifetime_sec, 60.0)
        self.assertIsNone(s.default_project)
        self.assertEqual(s.scopes, DEFAULT_SCOPES)
        self.assertEqual(s.delete_batch_size, 100)

    def test_rejects_invalid_values(self) -> None:
        with self.assertRaises(ValueError):
            DriveSettings(drive_name=" ")
        with self.assertRaises(ValueError):
            DriveSettings(cache_lifetime_sec=-1)
        with self.assertRaises(ValueError):
            DriveSettings(delete_batch_size=101)
        with self.assertRaises(ValueError):
            DriveSettings(delete_batch_size=0)
        with self.assertRaises(ValueError):
            DriveSettings(scopes=())

    def test_from_env(self) -> None:
        s = DriveSettings.from_env(
            {
                "GCSDRIVE_DRIVE_NAME": "cloud",
                "GCSDRIVE_CACHE_LIFETIME_SEC": "5",
                "GCSDRIVE_SCOPES": "a, b,",
                "GCSDRIVE_MAX_RETRIES": "0",
                "GCSDRIVE_DELETE_BATCH_SIZE": "10",
                "GOOGLE_CLOUD_PROJECT": "proj-1",
            }
        )
        self.assertEqual(s.drive_name, "cloud")
        self.assertEqual(s.cache_lifetime_sec, 5.0)
        self.assertEqual(s.scopes, ("a", "b"))
        self.assertEqual(s.max_retries, 0)
        self.assertEqual(s.delete_batch_size, 10)
        self.assertEqual(s.default_project, "proj-1")

    def test_from_env_project_precedence(self) -> None:
        s = DriveSettings.from_env(
            {
                "GCSDRIVE_PROJECT": "",
                "CLOUDSDK_CORE_PROJECT": "from-gcloud",
                "GOOGLE_CLOUD_PROJECT": "from-google",
            }
        )
        self.assertEqual(s.default_project, "from-gcloud")

    def test_from_env_empty_gives_defaults(self) -> None:
        self.assertEqual(DriveSettings.from_env({}), DriveSettings())


if __name__ == "__main__":
    unittest.main()
