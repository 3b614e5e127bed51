import os

# Precisa valer antes do primeiro "import app"
os.environ['CPB_CONFIG'] = 'test'
