"""Example script reading cars and tracks back out of the graph."""

import sys
from pathlib import Path

from dotenv import load_dotenv

# Add parent directory to path to import iracing_graph package
sys.path.append(str(Path(__file__).parent.parent))

# Load environment variables before the package reads its configuration
load_dotenv()

from iracing_graph import config
from iracing_graph.logger import configure_logging
from iracing_graph.models.car import CarWithProperties
from iracing_graph.models.track import TrackWithProperties
from iracing_graph.services import services_from_env


def format_car(car: CarWithProperties) -> str:
    """Format a car and its properties for display."""
    output = [f"Car: {car.car_name} (id={car.id})"]
    if car.price_display:
        output.append(f"Price: {car.price_display}")
    properties = ", ".join(p.name for p in car.properties) or "none"
    output.append(f"Properties: {properties}")
    return "\n".join(output)


def format_track(track: TrackWithProperties) -> str:
    """Format a track with its configurations and properties for display."""
    output = [f"Track: {track.track_name} (sku={track.id})"]
    if track.location:
        output.append(f"Location: {track.location}")
    for track_config in track.configs:
        output.append(
            f"\t{track_config.name}: {track_config.length:.3f} mi, "
            f"{track_config.corners_per_lap} corners, {track_config.max_cars} cars"
        )
    properties = ", ".join(p.name for p in track.properties) or "none"
    output.append(f"Properties: {properties}")
    return "\n".join(output)


def main():
    """Main query demonstration script."""
    configure_logging(config.LOG_LEVEL)

    services = services_from_env(initialize_schema=False)

    try:
        print("Cars\n" + "-" * 50)
        for car in services.cars.get_all():
            print(format_car(services.cars.with_properties(car)))
            print()

        print("Tracks\n" + "-" * 50)
        for track in services.tracks.get_all():
            print(format_track(services.tracks.with_properties(track)))
            print()

        print("Free tracks\n" + "-" * 50)
        for track in services.tracks.find({"free_with_subscription": True}):
            print(track.track_name)
    finally:
        services.close()


if __name__ == "__main__":
    main()
