"""VoiceRelay: record audio, relay it to a speech-to-text service, keep the transcripts."""
