# Client-side gRPC bindings for publisher.proto.
"""Client and server classes corresponding to protobuf-defined services."""
import grpc
from google.protobuf import empty_pb2 as google_dot_protobuf_dot_empty__pb2

from thorstream.proto import publisher_pb2 as publisher__pb2


class EventPublisherStub(object):
    """Missing associated documentation comment in .proto file."""

    def __init__(self, channel):
        """Constructor.

        Args:
            channel: A grpc.Channel.
        """
        self.SubscribeToTransactions = channel.unary_stream(
            "/publisher.EventPublisher/SubscribeToTransactions",
            request_serializer=google_dot_protobuf_dot_empty__pb2.Empty.SerializeToString,
            response_deserializer=publisher__pb2.StreamResponse.FromString,
        )
        self.SubscribeToSlotStatus = channel.unary_stream(
            "/publisher.EventPublisher/SubscribeToSlotStatus",
            request_serializer=google_dot_protobuf_dot_empty__pb2.Empty.SerializeToString,
            response_deserializer=publisher__pb2.StreamResponse.FromString,
        )
        self.SubscribeToWalletTransactions = channel.unary_stream(
            "/publisher.EventPublisher/SubscribeToWalletTransactions",
            request_serializer=publisher__pb2.SubscribeWalletRequest.SerializeToString,
            response_deserializer=publisher__pb2.StreamResponse.FromString,
        )
        self.SubscribeToAccountUpdates = channel.unary_stream(
            "/publisher.EventPublisher/SubscribeToAccountUpdates",
            request_serializer=publisher__pb2.SubscribeAccountsRequest.SerializeToString,
            response_deserializer=publisher__pb2.StreamResponse.FromString,
        )
