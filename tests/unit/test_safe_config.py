# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import tempfile
import threading
import time
import unittest
from pathlib import Path

from pulsecheck.errors import ConfigLoadError
from pulsecheck.schema import SafeConfig
from pulsecheck.schema.safe_config import ReadWriteLock

TESTDATA = Path(__file__).resolve().parent.parent / "testdata"


def _document(count: int) -> str:
    lines = ["modules:"]
    for index in range(count):
        lines += [
            f"  ldap_{index}:",
            "    ldap:",
            "      query:",
            f"        dn: ou=unit{count},dc=example,dc=org",
        ]
    return "\n".join(lines) + "\n"


class SafeConfigConcurrencyTests(unittest.TestCase):
    def test_readers_never_see_a_partial_config(self):
        with tempfile.TemporaryDirectory() as root:
            small = Path(root) / "small.yml"
            large = Path(root) / "large.yml"
            small.write_text(_document(2), encoding="utf-8")
            large.write_text(_document(20), encoding="utf-8")

            holder = SafeConfig.from_file(small)
            stop = threading.Event()
            problems = []

            def reader():
                while not stop.is_set():
                    config = holder.current()
                    count = len(config.modules)
                    dns = {module.ldap.query.dn for module in config.modules.values()}
                    if dns != {f"ou=unit{count},dc=example,dc=org"}:
                        problems.append((count, dns))

            def writer():
                for index in range(30):
                    holder.reload(large if index % 2 else small)

            readers = [threading.Thread(target=reader) for _ in range(4)]
            for thread in readers:
                thread.start()
            writer_thread = threading.Thread(target=writer)
            writer_thread.start()
            writer_thread.join(timeout=30)
            stop.set()
            for thread in readers:
                thread.join(timeout=5)

        self.assertFalse(writer_thread.is_alive())
        self.assertEqual(problems, [])

    def test_failed_reload_under_concurrent_reads(self):
        holder = SafeConfig.from_file(TESTDATA / "pulsecheck-good.yml")
        before = holder.current()
        seen = []

        def reader():
            for _ in range(200):
                seen.append(holder.current())

        thread = threading.Thread(target=reader)
        thread.start()
        with self.assertRaises(ConfigLoadError):
            holder.reload(TESTDATA / "pulsecheck-bad.yml")
        thread.join(timeout=5)

        self.assertTrue(all(config is before for config in seen))
        self.assertIs(holder.current(), before)


class ReadWriteLockTests(unittest.TestCase):
    def test_readers_share_the_lock(self):
        lock = ReadWriteLock()
        inside = threading.Barrier(2, timeout=5)
        errors = []

        def reader():
            with lock.read():
                try:
                    inside.wait()
                except threading.BrokenBarrierError as exc:  # pragma: no cover - failure path
                    errors.append(exc)

        threads = [threading.Thread(target=reader) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)
        self.assertEqual(errors, [])

    def test_writer_excludes_readers(self):
        lock = ReadWriteLock()
        events = []
        writer_in = threading.Event()

        def writer():
            with lock.write():
                writer_in.set()
                time.sleep(0.05)
                events.append("write-done")

        def reader():
            writer_in.wait(timeout=5)
            with lock.read():
                events.append("read")

        threads = [threading.Thread(target=writer), threading.Thread(target=reader)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        self.assertEqual(events, ["write-done", "read"])

    def test_lock_released_after_exception(self):
        lock = ReadWriteLock()
        with self.assertRaises(RuntimeError):
            with lock.write():
                raise RuntimeError("boom")
        with lock.read():
            pass
        with lock.write():
            pass


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
