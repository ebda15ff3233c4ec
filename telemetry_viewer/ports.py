from typing import Callable, List, Optional, Sequence

import serial.tools.list_ports


def list_port_names() -> List[str]:
    """Device names of every port the host currently reports (may be empty)."""
    try:
        return [p.device for p in serial.tools.list_ports.comports()]
    except Exception:
        return []


def order_candidates(ports: Sequence[str], preferred: Optional[str]) -> List[str]:
    """
    Stable partition: the preferred port (if enumerated) goes first,
    everything else keeps its enumeration order.
    """
    ordered = list(ports)
    if preferred and preferred in ordered:
        ordered.remove(preferred)
        ordered.insert(0, preferred)
    return ordered


class PortSelector:
    def __init__(self, preferred: Optional[str] = None,
                 enumerate_ports: Callable[[], Sequence[str]] = list_port_names):
        self.preferred = preferred
        self._enumerate = enumerate_ports

    def candidates(self) -> List[str]:
        try:
            ports = list(self._enumerate())
        except Exception:
            ports = []
        return order_candidates(ports, self.preferred)
