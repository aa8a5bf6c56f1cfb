from guildhall.storage.graph.world_graph import WorldGraph

__all__ = ["WorldGraph"]
