"""Network implementations of IElevatorPort"""

from .xmlrpc_port import XmlRpcElevatorPort

__all__ = ['XmlRpcElevatorPort']
