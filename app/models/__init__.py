from app.models.packet_settings import PacketSettings

__all__ = ["PacketSettings"]
