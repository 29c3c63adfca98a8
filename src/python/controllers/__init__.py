"""Controllers package for the emission timeline.

Main Components:
    EmissionController: Connects the emission store, the timeline engine and
        the inspector, and serves as the engine's TimelineHost

Usage:
    from controllers import EmissionController

    controller = EmissionController(store, inspector)
    controller.engine.attach(surface)
    controller.load("path/to/set.json")
"""

from controllers.emission_controller import EmissionController

__all__ = ['EmissionController']
