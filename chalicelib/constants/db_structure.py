PARTITION_KEY = 'partkey'
SORT_KEY = 'sortkey'

# gsi1: patrons of a tenant by name, gsi2: orders of a patron by creation time
GSI1_PK = 'gsi1pk'
GSI1_SK = 'gsi1sk'
GSI2_PK = 'gsi2pk'
GSI2_SK = 'gsi2sk'

INDEX_ATTRIBUTES = (PARTITION_KEY, SORT_KEY, GSI1_PK, GSI1_SK, GSI2_PK, GSI2_SK)
