import pytest

# add $7, $5, $6
ADD_7_5_6 = 0x00A63820
# add $8, $7, $0   (reads $7)
ADD_8_7_0 = 0x00E04020
# add $7, $8, $9   (writes $7 again, reads neither $5 nor $6)
ADD_7_8_9 = 0x01093820
# addi $8, $0, 5 / addi $9, $0, 10 / add $10, $8, $9
ADDI_8 = 0x20080005
ADDI_9 = 0x2009000A
ADD_10_8_9 = 0x01095020
# add $10, $8, $8
ADD_10_8_8 = 0x01085020


@pytest.fixture
def raw_pair():
    return [ADD_7_5_6, ADD_8_7_0]


@pytest.fixture
def double_dependency():
    return [ADDI_8, ADDI_9, ADD_10_8_9]
