"""
Wire bindings: events.proto (stream payloads) and publisher.proto (the
EventPublisher service). The .proto files ship alongside as the schema of
record.
"""
