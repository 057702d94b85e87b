from shared.clients.audio.openai.AudioClientOpenai import AudioClientOpenai
from shared.clients.connections.CustomConnection import CustomConnection


class AudioClientCustom(CustomConnection, AudioClientOpenai):
    pass
