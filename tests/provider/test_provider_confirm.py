import unittest

from gcsdrive.provider.confirm import ConfirmationPolicy, ConfirmChoice


class TestConfirmationPolicy(unittest.TestCase):
    def test_without_callback_everything_is_confirmed(self) -> None:
        policy = ConfirmationPolicy()
        self.assertTrue(policy.should_process("b/x", "Remove-Item"))
        self.assertTrue(policy.should_continue("q", "c"))

    def test_force_skips_callback(self) -> None:
        calls = []
        policy = ConfirmationPolicy(lambda q, c: calls.append(q) or ConfirmChoice.NO, force=True)
        self.assertTrue(policy.should_continue("q", "c"))
        self.assertEqual(calls, [])

    def test_yes_and_no_are_asked_every_time(self) -> None:
        answers = [ConfirmChoice.YES, ConfirmChoice.NO, ConfirmChoice.YES]
        policy = ConfirmationPolicy(lambda q, c: answers.pop(0))

        self.assertTrue(policy.should_continue("q", "c"))
        self.assertFalse(policy.should_continue("q", "c"))
        self.assertTrue(policy.should_continue("q", "c"))

    def test_yes_to_all_is_remembered(self) -> None:
        calls = []

        def _cb(query, caption):
            calls.append(query)
            return ConfirmChoice.YES_TO_ALL

        policy = ConfirmationPolicy(_cb)
        self.assertTrue(policy.should_continue("q1", "c"))
        self.assertTrue(policy.should_continue("q2", "c"))
        self.assertEqual(calls, ["q1"])

        policy.reset()
        policy.should_continue("q3", "c")
        self.assertEqual(calls, ["q1", "q3"])

    def test_no_to_all_is_remembered(self) -> None:
        calls = []

        def _cb(query, caption):
            calls.append(query)
            return ConfirmChoice.NO_TO_ALL

        policy = ConfirmationPolicy(_cb)
        self.assertFalse(policy.should_continue("q1", "c"))
        self.assertFalse(policy.should_continue("q2", "c"))
        self.assertTrue(policy.refused_all)
        self.assertEqual(calls, ["q1"])

        policy.reset()
        self.assertFalse(policy.refused_all)

    def test_should_process_ignores_remembered_answers(self) -> None:
        answers = {"q1": ConfirmChoice.NO_TO_ALL, "q2": ConfirmChoice.YES_TO_ALL}
        calls = []

        def _cb(query, caption):
            calls.append(query)
            return answers.get(query, ConfirmChoice.NO)

        policy = ConfirmationPolicy(_cb)
        policy.should_continue("q1", "c")
        self.assertFalse(policy.should_process("b/x", "Remove-Item"))

        policy.reset()
        policy.should_continue("q2", "c")
        self.assertFalse(policy.should_process("b/y", "Remove-Item"))
        self.assertEqual(len(calls), 4)

    def test_should_process_accepts_yes_to_all_without_remembering(self) -> None:
        answers = [ConfirmChoice.YES_TO_ALL, ConfirmChoice.NO]
        policy = ConfirmationPolicy(lambda q, c: answers.pop(0))

        self.assertTrue(policy.should_process("b/x", "Remove-Item"))
        self.assertFalse(policy.should_continue("q", "c"))

    def test_should_process_query(self) -> None:
        seen = []
        policy = ConfirmationPolicy(lambda q, c: seen.append((q, c)) or ConfirmChoice.YES)

        policy.should_process("b/x", "Remove-Item")

        self.assertEqual(
            seen,
            [('Performing the operation "Remove-Item" on target "b/x".', "Remove-Item")],
        )


if __name__ == "__main__":
    unittest.main()
