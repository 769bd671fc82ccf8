"""Allow running QuestTimer as a module: python -m questtimer."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .audio.ambient import AmbientPlayer
from .quest.controller import QuestController
from .settings import load_settings, save_settings
from .ui.window import QuestWindow

logger = logging.getLogger(__name__)


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )

    app = QApplication(sys.argv)
    app.setApplicationName("QuestTimer")
    app.setOrganizationName("QuestTimer")

    controller = QuestController(settings=settings)
    ambient = AmbientPlayer(volume=settings.ambient_volume)
    ambient.play(settings.ambient_sound)

    window = QuestWindow(controller, ambient)
    window.resize(settings.window_width, settings.window_height)
    window.show()
    logger.info(
        "QuestTimer ready for %s and %s",
        controller.adventurer_name, controller.companion_name,
    )

    exit_code = app.exec()

    controller.shutdown()
    settings.ambient_sound = ambient.current
    settings.ambient_volume = ambient.volume
    ambient.close()
    save_settings(settings)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
