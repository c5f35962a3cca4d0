"""Control table for Feetech STS3215 servos.

Based on STS_SMS_SERIES_CONTROL_TABLE
Reference: http://doc.feetech.cn/#/prodinfodownload?srcType=FT-SMS-STS-emanual-229f4476422d4059abfb1cb0
"""

# Firmware series the addresses below were taken from.
CONTROL_TABLE_SERIES = "STS_SMS_SERIES"

# Format: (address, size_bytes)

# EEPROM (non-volatile memory)
ADDR_MODEL_NUMBER = (0x03, 2)  # read-only
ADDR_ID = (0x05, 1)

# SRAM (volatile memory)
ADDR_TORQUE_ENABLE = (0x28, 1)
ADDR_ACCELERATION = (0x29, 1)
# Goal block: position (2), then goal time (2) at 0x2C, then goal speed (2) at 0x2E.
ADDR_GOAL_POSITION = (0x2A, 2)
ADDR_PRESENT_POSITION = (0x38, 2)  # read-only
ADDR_PRESENT_SPEED = (0x3A, 2)  # read-only, uses bit 15 for sign-magnitude
ADDR_PRESENT_LOAD = (0x3C, 2)  # read-only, uses bit 10 for sign-magnitude
ADDR_PRESENT_VOLTAGE = (0x3E, 1)  # read-only, 0.1 V units
ADDR_PRESENT_TEMPERATURE = (0x3F, 1)  # read-only, degrees Celsius
ADDR_STATUS = (0x41, 1)  # read-only
ADDR_MOVING = (0x42, 1)  # read-only
ADDR_PRESENT_CURRENT = (0x45, 2)  # read-only

# Instruction codes
INST_PING = 0x01
INST_READ = 0x02
INST_WRITE = 0x03

BROADCAST_ID = 0xFE
MAX_SERVO_ID = 0xFD

# Common values
TORQUE_ENABLE = 1
TORQUE_DISABLE = 0

# 12-bit absolute encoder
POSITION_RESOLUTION = 4096
MAX_POSITION = POSITION_RESOLUTION - 1

# Sign-magnitude encoding bits for STS_SMS_SERIES
ENCODING_BIT_SPEED = 15
ENCODING_BIT_LOAD = 10
