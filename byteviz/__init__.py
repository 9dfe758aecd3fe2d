# byteviz: pixel-grid and hex-dump views of a file's bytes
