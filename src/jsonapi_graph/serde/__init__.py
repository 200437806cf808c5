"""
:py:mod:`jsonapi_graph.serde` holds everything that touches the wire representation:
the value formatter, the two-pass deserializer and the serializer.
"""
