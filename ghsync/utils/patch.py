"""Email extraction from pull request patch files.

A patch file (``https://github.com/<owner>/<repo>/pull/<n>.patch``) starts each
commit with mail-style headers, for example::

    From: zhangsan <zhangsan@example.com>
    Subject: [PATCH 1/1] Update 5.txt

    Signed-off-by: zhangsan <zhangsan@example.com>

The sign-off line is preferred over the commit author header.
"""

import re

EMAIL_PATTERN = r"\w+(?:[-+.]\w+)*@\w+(?:[-.]\w+)*\.\w+(?:[-.]\w+)*"

_SIGNED_OFF_LINE = re.compile(r"Signed-off-by:.*")
_FROM_LINE = re.compile(r"From:.*")
_BRACKETED_EMAIL = re.compile(rf"<({EMAIL_PATTERN})>")


def _first_email(patch: str, line_pattern: re.Pattern[str]) -> str | None:
    for line in line_pattern.findall(patch):
        match = _BRACKETED_EMAIL.search(line)
        if match:
            return match.group(1)
    return None


def extract_email_from_patch(patch: str | None) -> str | None:
    """Find the contributor email in a patch.

    Args:
        patch: Patch text of a pull request

    Returns:
        The first ``Signed-off-by`` email, else the first ``From:`` email,
        else None
    """
    if not patch:
        return None

    return _first_email(patch, _SIGNED_OFF_LINE) or _first_email(patch, _FROM_LINE)
