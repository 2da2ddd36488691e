"""Model executor adapters.

Import the concrete modules directly; ``torch_executor`` pulls in
``transformers`` and ``onnx_executor`` only needs ``onnxruntime`` when a
session is created from a path.
"""
