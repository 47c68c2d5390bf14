"""Entry script for running mac-volume from a source checkout."""

from mac_volume.cli import main

if __name__ == "__main__":
    main()
