"""Minimal runnable demo for webmap-walkthrough."""

from webmap_walkthrough.cli import main

if __name__ == "__main__":
    # Renders every step into .output/; pass CLI flags to narrow it down.
    main()
