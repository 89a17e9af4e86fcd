import os

# Circuit built when no configuration overrides it
DEFAULT_CIRCUIT_NAME = "verify_header"
# Phase 1 powers of tau file, downloaded out-of-band
# https://github.com/iden3/snarkjs#7-prepare-phase-2
DEFAULT_PTAU_PATH = "../../../powers_of_tau/powersOfTau28_hez_final_27.ptau"
# Rapidsnark prover binary
DEFAULT_PROVER_PATH = "../../../rapidsnark/build/prover"
# Patched node used for the memory hungry trusted setup steps
DEFAULT_SETUP_NODE_PATH = "../../../node/out/Release/node"
# snarkjs CLI entry script
DEFAULT_SNARKJS_CLI = "../node_modules/snarkjs/cli.js"
# Directory names relative to the circuit directory
BUILD_DIR_NAME = "build"
COMPILED_DIR_NAME = "compiled_circuit"
TRUSTED_SETUP_DIR_NAME = "trusted_setup"
INPUT_DIR_NAME = "input"
VERIFIER_DIR_NAME = "contract"
LOG_DIR_NAME = "logs"
SLOT_PROOF_DIR_PREFIX = "proof_data_"
# circom compiler flags
DEFAULT_COMPILER_FLAGS = ["--O1", "--r1cs", "--sym", "--c"]
# Node flags for zkey new / zkey verify on large circuits
DEFAULT_SETUP_NODE_OPTIONS = [
    "--trace-gc",
    "--trace-gc-ignore-scavenger",
    "--max-old-space-size=2048000",
    "--initial-old-space-size=2048000",
    "--no-global-gc-scheduling",
    "--no-incremental-marking",
    "--max-semi-space-size=1024",
    "--initial-heap-size=2048000",
    "--expose-gc",
]
# Phase 2 contribution parameters
DEFAULT_CONTRIBUTION_NAME = "First phase2 contribution"
DEFAULT_CONTRIBUTION_ENTROPY = "some random text for entropy"
# Log file timestamp format
LOG_TIMESTAMP_FORMAT = "%Y-%m-%d-%H-%M"
# Exit code reported when an executable cannot be started
COMMAND_NOT_FOUND_EXIT_CODE = 127
# Exit code reported when an executable exists but cannot be run
COMMAND_NOT_EXECUTABLE_EXIT_CODE = 126
# Environment variables
SLOT_ENV_VAR = "SLOT"
CONFIG_ENV_VAR = "CIRCUIT_PIPELINE_CONFIG"
DEFAULT_CONFIG_PATH = os.getenv(CONFIG_ENV_VAR)
# Name of the stdlib logger behind bt.logging
BITTENSOR_LOGGER_NAME = "bittensor"
