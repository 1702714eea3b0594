"""M3 metric structs for wire versions 1 and 2, with shared type ids, errors and skipping."""