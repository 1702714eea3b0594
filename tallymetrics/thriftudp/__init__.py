"""UDP transports that buffer writes and send them as single packets, singly or to several destinations."""