from flask import Blueprint, jsonify
from overunder import registry

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({
        'message': 'Welcome to the Over-Under game server!',
        'title': 'Over-Under: Hvilket stedsnavn er mest populært?',
        'dataset': registry.summary(),
    })
