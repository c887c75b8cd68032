"""Neo4j schema definitions.

This module defines the graph model for iRacing data:
- Node labels for cars, tracks, track configurations and shared properties
- Relationship types connecting them
- Keys that identify each kind of node
"""

# Node labels
CAR = "Car"
TRACK = "Track"
TRACK_CONFIG = "TrackConfig"
PROPERTY = "Property"

# Relationship types
HAS_PROPERTY = "HAS_PROPERTY"
CONFIG_OF = "CONFIG_OF"

# Property keys
ID = "id"
TYPE = "type"
NAME = "name"
CREATED_AT = "created_at"
UPDATED_AT = "updated_at"

# Property that uniquely identifies a node of each label
NODE_KEYS = {
    CAR: ID,
    TRACK: ID,
    TRACK_CONFIG: ID,
    PROPERTY: TYPE,
}
