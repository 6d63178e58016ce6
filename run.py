import sys

if __name__ == "__main__":
    from pipeview.main import main
    sys.exit(main())
