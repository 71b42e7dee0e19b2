"""
Bridge Tester Controller.

Entry point for the controller process.
"""

from ddtrace import patch_all

from bridge_tester.controller.dependencies import get_controller

patch_all()


def main():
    """Starts the controller."""
    controller = get_controller()
    controller.start()


if __name__ == "__main__":
    main()
