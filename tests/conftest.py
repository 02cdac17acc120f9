# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from fluentreq import config, log
from fluentreq.http import client as http_client


@pytest.fixture(autouse=True)
def _reset_process_switches():
    """Strict mode, the log sink and the shared client are process-wide; isolate each test."""
    previous_client = http_client.set_default_client(None)
    yield
    config.disable_strict_mode()
    log.set_logger(None)
    http_client.set_default_client(previous_client)
