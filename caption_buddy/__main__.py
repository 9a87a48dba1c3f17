"""Package entry point for ``python -m caption_buddy``.

HOW: Delegates to the CLI's main(); see cli.py for the subcommands.
"""

if __name__ == "__main__":
    from caption_buddy.cli import main
    main()
