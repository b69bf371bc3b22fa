"""Header names and operation codes shared by all dispatchers.

The header names are case sensitive and agreed with the host pipeline.
Operation codes are stable integers; a code is never reused for a
semantically different operation, including across collection types.
"""

from enum import IntEnum


OPERATION = "HazelcastOperationType"
OBJECT_ID = "HazelcastObjectId"
OBJECT_VALUE = "HazelcastObjectValue"
QUERY = "HazelcastQuery"

# set on messages produced for listeners
CACHE_NAME = "HazelcastCacheName"
CACHE_TYPE = "HazelcastCacheType"

MAP_CACHE_TYPE = "map"


class Operation(IntEnum):
    """Operation codes carried by the OPERATION header."""

    PUT = 1
    DELETE = 2
    GET = 3
    UPDATE = 4
    QUERY = 5
    GET_ALL = 6
    CLEAR = 7
    REPLACE = 8

    # multimap
    REMOVE_VALUE = 20

    # queue
    ADD = 30
    OFFER = 31
    PEEK = 32
    POLL = 33

    # atomic number
    INCREMENT = 40
    DECREMENT = 41
    SET_VALUE = 42

    # topic
    PUBLISH = 50


MAP_OPERATIONS = frozenset(
    {
        Operation.PUT,
        Operation.GET,
        Operation.GET_ALL,
        Operation.DELETE,
        Operation.UPDATE,
        Operation.QUERY,
        Operation.REPLACE,
        Operation.CLEAR,
    }
)

# dispatch-control headers, not propagated to the outbound message
CONTROL_HEADERS = (OBJECT_ID, OPERATION)
