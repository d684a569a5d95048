"""Best-effort publisher heuristics.

Publishers are guessed from substrings of the command path. The guess
is for display only and carries no guarantee of correctness.
"""

# (substring, publisher) pairs checked in order, case-insensitively.
CONTEXT_MENU_PUBLISHERS: tuple[tuple[str, str], ...] = (
    ("Visual Studio", "Microsoft Corporation"),
    ("VS Code", "Microsoft Corporation"),
    ("\\Code.exe", "Microsoft Corporation"),
    ("Git", "Git"),
    ("7-Zip", "Igor Pavlov"),
    ("Dropbox", "Dropbox, Inc."),
    ("OneDrive", "Microsoft Corporation"),
    ("WinRAR", "win.rar GmbH"),
    ("Tortoise", "TortoiseSVN"),
)

STARTUP_PUBLISHERS: tuple[tuple[str, str], ...] = (
    ("Microsoft", "Microsoft Corporation"),
    ("OneDrive", "Microsoft Corporation"),
    ("Dropbox", "Dropbox, Inc."),
    ("Google", "Google LLC"),
    ("Adobe", "Adobe Inc."),
    ("Steam", "Valve Corporation"),
    ("Discord", "Discord Inc."),
    ("Slack", "Slack Technologies"),
    ("Spotify", "Spotify AB"),
)


def guess_publisher(command: str, table: tuple[tuple[str, str], ...]) -> str | None:
    """Guess the publisher of a program from its command line.

    Args:
        command: Command line or executable path.
        table: Ordered (substring, publisher) pairs.

    Returns:
        Publisher name of the first matching substring, None if nothing matches.
    """
    folded = command.casefold()
    for needle, publisher in table:
        if needle.casefold() in folded:
            return publisher
    return None
