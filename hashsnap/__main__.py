"""Allow `python -m hashsnap`."""

from hashsnap import main

if __name__ == "__main__":
    main()
