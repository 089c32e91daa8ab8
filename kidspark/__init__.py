"""KidSpark Backend.

Family learning platform serving interactive lessons to children and
tracking their progress per lesson.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
