# uberwolf

Pure-Python routines for reading the protected data of WOLF RPG Editor games:

- the engine's modified AES-128 CTR cipher, its SHA-512 variant, a ChaCha20
  stream with the engine's key setup, and the custom random number chains
  the key schedules rely on;
- decryption of `Game.dat`, `CommonEvent.dat`, `DataBase.dat` and related
  files for the 2.x, 3.3 and 3.5 ("Pro") protection schemes;
- recovery of the DX archive key and of the protection key from `Game.dat`;
- removal of the XOR layer from `.project` files and repair of the size
  field of a decrypted `Game.dat`;
- decryption of `.wolfx` files from candidate keys, strings and integers.

No third-party packages are needed.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `uberwolf.rng` | `MsvcRandom`, `MT19937`, `RngData`, `CryptData`, `custom_rng1/2/3`, `rng_chain`, `run_rng_chain`, `a_lot_of_rng_stuff`, `is_v35`, `gen_mt_seed` |
| `uberwolf.aes` | `key_expansion`, `make_round_key`, `init_aes128`, `cipher`, `aes_ctr_xcrypt` |
| `uberwolf.sha512` | `preprocess`, `process`, `digest`, `hash_hex`, `calc_dyn_salt`, `salt_password` |
| `uberwolf.keycrypt` | `init_wolf_crypt`, `wolf_crypt`, `calc_salt`, `xorshift32`, `crypt_addresses`, `aes_key_gen` |
| `uberwolf.chacha20` | `ChaCha20` (`block_next`, `execute`), `pack4`, `key_setup` |
| `uberwolf.datadecrypt` | `WolfFileType`, `ProMagic`, `PRO_MAGIC`, `NotProtectedError`, `decrypt_data_v2`, `rng_decrypt_v33`, `init_crypt_v33`, `decrypt_data_v33`, `decrypt_pro_v3p1`, `decrypt_data_v35` |
| `uberwolf.dxarckey` | `init_crypt`, `decrypt_game_dat`, `calc_key` |
| `uberwolf.protkey` | `validate_key`, `find_key`, `calc_prot_key` |
| `uberwolf.unprotect` | `PROTECTED_FILES`, `get_wolf_file_type`, `game_dat_update_size`, `unprotect_project` |
| `uberwolf.fileutils` | `byte_to_hex_string`, `file_to_buffer`, `buffer_to_file`, `backup_file` |
| `uberwolf.wolfx.model` | `WolfXDecryptKey`, `WolfXDecryptCollection`, `WolfXFile`, `DecryptParams`, `DecryptResult` |
| `uberwolf.wolfx.generator` | `generate_static_blob`, `generate_decrypt_blob`, `fnv1` |
| `uberwolf.wolfx.validate` | `validate_checksum` |
| `uberwolf.wolfx.datamanip` | `xor_buffer_blob` |
| `uberwolf.wolfx.utils` | `extract_bytes`, `combine_bytes`, `collect_wolfx_files` |
| `uberwolf.wolfx.crack` | `try_decrypt_p1/p2/p3`, `crack_wolfx`, `crack_wolfx_files`, `decrypt_full`, `decrypt_file`, `DecryptionError` |
| `uberwolf.wolfx.benchmark` | `benchmark`, `main` |

## Examples

Find out which kind of data file a path names:

```python
from uberwolf.unprotect import get_wolf_file_type

print(get_wolf_file_type("Data/BasicData/Game.dat"))  # WolfFileType.GAME_DAT
```

Strip the 3.5 protection from a data file in memory. A file without the
protection header raises `NotProtectedError`:

```python
from uberwolf.datadecrypt import WolfFileType, decrypt_data_v35
from uberwolf.fileutils import buffer_to_file, file_to_buffer

buffer = file_to_buffer("Data/BasicData/CommonEvent.dat")
decrypt_data_v35(buffer, WolfFileType.COMMON_EVENT)
buffer_to_file("CommonEvent.dat", buffer)
```

For a `Game.dat`, pass the size the file had before decryption to
`game_dat_update_size(buffer, old_size)` so that its stored size matches the
shorter buffer.

Recover the DX archive key of a game:

```python
from uberwolf.dxarckey import calc_key
from uberwolf.fileutils import file_to_buffer

print(calc_key(file_to_buffer("Data/BasicData/Game.dat")).hex())
```

Decrypt every `.wolfx` file below a folder with a collection of candidate
keys:

```python
from uberwolf.wolfx.crack import crack_wolfx_files
from uberwolf.wolfx.model import WolfXDecryptCollection, WolfXDecryptKey
from uberwolf.wolfx.utils import collect_wolfx_files

collection = WolfXDecryptCollection()
collection.decrypt_keys.append(WolfXDecryptKey("/", ""))

files = collect_wolfx_files("Data")
crack_wolfx_files(files, collection)
```

Files are tried smallest first; the key and magic values that worked for one
file are tried first on the next, and files that failed are retried, for at
most five passes. Each decrypted file is written next to its source, without
the `.wolfx` extension.

When the key and magic values of a file are already known, `decrypt_file`
writes the plain file and returns its path, or raises `DecryptionError`
when the checksum does not match:

```python
from uberwolf.wolfx.crack import decrypt_file

decrypt_file("Data/picture.png.wolfx", "placeholder", magic_str="", magic_int=0)
```

## Benchmark

Measure how many WolfX decryptions per second the machine manages on a
given file (100000 by default):

```
uberwolf-benchmark path/to/file.wolfx --keys 1000
```

## What the package does not do

- It does not read maps or common events. The candidate keys, strings and
  integers in a `WolfXDecryptCollection` must be filled in by the caller.
- It has no command that unprotects a whole game folder. `unprotect`,
  `datadecrypt` and `fileutils` provide the steps (file type, backup,
  decryption, size repair, `.project` unmasking), but further repair of
  decrypted common events and databases is not included.
- It does not unpack DX archives; it only recovers their key.